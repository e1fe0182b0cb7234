import numpy as np
from PIL import Image

from imgii.errors import CellSizeError, EmptyInputError
from imgii.grid import CharacterGrid


def stitch(grid: CharacterGrid) -> Image.Image:
    """Composite a grid of equally sized cells into one RGBA canvas.

    Canvas pixel (x, y) is a straight copy of pixel (x % cw, y % ch) of the cell in column
    x // cw and row y // ch. No blending or resampling.
    """
    if not grid.cells:
        raise EmptyInputError("grid")
    if grid.width * grid.height != len(grid.cells):
        raise CellSizeError(f"grid of {grid.width}x{grid.height} holds {len(grid.cells)} cells")

    cw, ch = grid.cells[0].size

    # Shared cells are converted once
    arrays: dict[int, np.ndarray] = {}
    blocks = []
    for cell in grid.cells:
        key = id(cell)
        if key not in arrays:
            if cell.size != (cw, ch):
                raise CellSizeError(f"cell of size {cell.size} in a grid of {cw}x{ch} cells")
            arrays[key] = np.asarray(cell.convert("RGBA"))
        blocks.append(arrays[key])

    # (rows, cols, ch, cw, 4) -> (rows, ch, cols, cw, 4) -> (rows * ch, cols * cw, 4)
    stacked = np.stack(blocks).reshape(grid.height, grid.width, ch, cw, 4)
    canvas = stacked.transpose(0, 2, 1, 3, 4).reshape(grid.height * ch, grid.width * cw, 4)
    return Image.fromarray(np.ascontiguousarray(canvas))
