"""
Synthetic drawings for the shapes examples.

Each drawing is a square grid of 0/1 pixels, flattened row by row, showing one
of six shapes. A little noise (flipped pixels) makes every sample different.
"""

import random

SHAPES = ["horizontal", "vertical", "diagonal", "anti-diagonal", "square", "cross"]

def draw_shape(shape: str, grid: int = 15, noise: float = 0.0) -> list[int]:
    """
    Draw one shape on a 'grid' x 'grid' bitmap.

    Parameters:
        shape: One of SHAPES
        grid:  Width (and height) of the grid
        noise: Probability of flipping each pixel

    Returns:
        Flat list of 'grid * grid' pixel values (0 or 1)
    """
    middle = grid // 2
    margin = grid // 5

    def painted(row, column):
        if shape == "horizontal":
            return row == middle and margin <= column < grid - margin
        if shape == "vertical":
            return column == middle and margin <= row < grid - margin
        if shape == "diagonal":
            return row == column
        if shape == "anti-diagonal":
            return row + column == grid - 1
        if shape == "square":
            inside = margin <= row < grid - margin and margin <= column < grid - margin
            border = row in (margin, grid - margin - 1) or column in (margin, grid - margin - 1)
            return inside and border
        if shape == "cross":
            return row == middle or column == middle
        raise ValueError(f"Unknown shape '{shape}'")

    pixels = []
    for row in range(grid):
        for column in range(grid):
            value = 1 if painted(row, column) else 0
            if noise and random.random() < noise:
                value = 1 - value
            pixels.append(value)
    return pixels

def make_samples(samples_per_shape: int = 1, grid: int = 15, noise: float = 0.0,
                 shapes: list[str] = SHAPES) -> list[tuple[list[int], list[int]]]:
    """(pixels, one-hot label) pairs, 'samples_per_shape' for every shape."""
    samples = []
    for index, shape in enumerate(shapes):
        expected = [1 if position == index else 0 for position in range(len(shapes))]
        for _ in range(samples_per_shape):
            samples.append((draw_shape(shape, grid, noise), expected))
    return samples
