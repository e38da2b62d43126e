import logging
import multiprocessing as mp

import numpy as np

from .depth_buffer import DepthBuffer
from .errors import GenerationCancelled
from .tessellation import tessellate_rows
from .utils import ROW_BLOCK, timed

logger = logging.getLogger(__name__)


def process_row_block(task):
    """Worker function for parallel surface tessellation."""
    idx, y_start, depth_rows, height, width_factor, border, base_z = task
    return idx, tessellate_rows(depth_rows, y_start, height, width_factor, border, base_z)


def _row_block_tasks(depth_buffer: DepthBuffer, base_z: float, block_rows: int):
    depth = depth_buffer.depth
    height = depth_buffer.height
    tasks = []
    for idx, y_start in enumerate(range(0, height - 1, block_rows)):
        y_end = min(y_start + block_rows, height - 1)
        # One extra row so the block can close its last quad row
        rows = depth[y_start:y_end + 1]
        tasks.append((idx, y_start, rows, height, depth_buffer.width_factor, depth_buffer.border, base_z))
    return tasks


@timed
def tessellate_surface_parallel(
    depth_buffer: DepthBuffer,
    base_z: float,
    progress_cb=None,
    should_cancel=None,
    processes=None,
    block_rows: int = ROW_BLOCK,
):
    """
    Tessellates the relief surface, fanning row blocks out to a process pool.

    Blocks are gathered in block order, so the output is identical to a
    single-process run. progress_cb receives the completed fraction (0..1).
    should_cancel is polled after every block.
    """
    tasks = _row_block_tasks(depth_buffer, base_z, block_rows)
    total = len(tasks)
    if total == 0:
        if progress_cb: progress_cb(1.0)
        return np.empty((0, 3), dtype=np.float32)

    if processes is None:
        processes = mp.cpu_count()
    processes = max(1, min(processes, total))

    results = []
    if processes == 1:
        for n, task in enumerate(tasks, start=1):
            if should_cancel and should_cancel():
                raise GenerationCancelled(f"Cancelled after {n - 1}/{total} row blocks")
            results.append(process_row_block(task))
            if progress_cb:
                progress_cb(n / total)
    else:
        logger.debug(f"Tessellating {total} row blocks on {processes} processes")
        with mp.Pool(processes=processes) as pool:
            for n, pair in enumerate(pool.imap(process_row_block, tasks), start=1):
                results.append(pair)
                if progress_cb:
                    progress_cb(n / total)
                # Leaving the with-block terminates outstanding workers
                if n < total and should_cancel and should_cancel():
                    raise GenerationCancelled(f"Cancelled after {n}/{total} row blocks")

    results.sort(key=lambda pair: pair[0])
    return np.concatenate([verts for _, verts in results])
