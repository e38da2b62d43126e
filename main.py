# macOS packaging support
import sys
from multiprocessing import freeze_support  # noqa
freeze_support()  # noqa

import multiprocessing
multiprocessing.set_start_method("spawn", force=True)

from lithomesh.cli import main

if __name__ == '__main__':
    sys.exit(main())
