#!/usr/bin/env python3
"""
Plot3DKit - Quick Reference

Common tasks, from a formula surface to a labelled bar chart, and how to
hand the geometry to matplotlib for drawing.
"""

# ============================================================================
# BASIC SETUP
# ============================================================================

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from Plot3DKit import Dimensions, Plot, PlotOptions, SurfaceResult

# 20 x 20 grid over the unit cube (PLOT3DKIT_X_RES / PLOT3DKIT_Z_RES override)
plot = Plot(Dimensions(x_res=20, z_res=20))

# ============================================================================
# FORMULA SURFACES
# ============================================================================

# x2 = f(x1, x3); x1 and x3 run from 0 to 1
surface = plot.plot_formula("sin(x1 * 2 * pi) * cos(x3 * pi)")
print(surface.heights.shape)          # (21, 21)

# Factorials, gamma and friends
plot.plot_formula("gamma(x1 + 1) * x3!")

# Named variables
plot.plot_formula("a * x1^2 + b * x3", variables={"a": 2.0, "b": -1.0})

# Recursion: f(x1, x3) refers to the formula itself, memoised per grid cell
plot.plot_formula("f(x1 - 0.05, x3) + x3")

# Any Python callable works too
plot.plot_function(lambda x1, x3: np.hypot(x1 - 0.5, x3 - 0.5))

# Sample a formula as points instead of a surface
points = plot.plot_formula("x1 * x3", mode="scatterplot")

# ============================================================================
# DATAFRAMES
# ============================================================================

rng = np.random.default_rng(0)
df = pd.DataFrame({
    "time": rng.uniform(0, 60, 200),
    "absorbance": rng.normal(1.0, 0.2, 200),
    "wavelength": rng.uniform(400, 800, 200),
    "sample": rng.choice(["Cu2O", "ZnO", "TiO2"], 200),
})

# Scatter plot, coloured by label (column 3)
points = plot.plot_dataframe(df, options=PlotOptions(color_column=3, labeled=True))
print(points.labels)                  # {'Cu2O': {...}, 'ZnO': {...}, ...}

# Bar chart; bars smaller than 10% of the tallest are hidden
bars = plot.plot_dataframe(df, mode="barchart", bar_size_threshold=0.1)

# Interpolated surface and self-organising map
smooth = plot.plot_dataframe(df, mode="interpolatedpolygon", gap_threshold=0.3)
som = plot.plot_dataframe(df, mode="selforganizingmap", som_epochs=40, seed=1)

# Options dictionaries may use the camelCase names (colorCol, keepOldPlot, ...)
plot.plot_dataframe(df, options={"mode": "lineplot", "colorCol": 1, "fraction": 0.5})

# ============================================================================
# STACKING AND ADDING POINTS
# ============================================================================

plot.plot_dataframe([[0, 0, 0], [1, 1, 1], [2, 0, 2]])
plot.plot_dataframe([[4, 2, 1]], keep_old_plot=True)      # bounds widen
plot.add_data_point([1, 0.5, 1])                           # uses current bounds
plot.add_data_point([8, 3, 3], renormalize=True)           # replot everything

# ============================================================================
# DRAWING WITH MATPLOTLIB
# ============================================================================


def draw(result, ax):
    """Draw a Plot3DKit result on a 3D axis (x2 is the vertical axis)."""
    if isinstance(result, SurfaceResult):
        grid_x, grid_z = np.meshgrid(result.x_positions, result.z_positions, indexing="ij")
        ax.plot_surface(grid_x, grid_z, result.normalized_heights,
                        facecolors=result.colors, shade=False)
    elif result.mode == "barchart":
        i, k = np.nonzero(result.visible)
        ax.bar3d(result.x_positions[i] - result.bar_width / 2,
                 result.z_positions[k] - result.bar_depth / 2,
                 np.zeros(len(i)), result.bar_width, result.bar_depth,
                 result.normalized_heights[i, k], color=result.colors[i, k])
    else:
        pos = result.positions
        ax.scatter(pos[:, 0], pos[:, 2], pos[:, 1], c=result.colors)
    ax.set_xlabel(result.titles[0])
    ax.set_ylabel(result.titles[2])
    ax.set_zlabel(result.titles[1])


fig = plt.figure(figsize=(12, 4))
for n, result in enumerate((surface, bars, som), start=1):
    draw(result, fig.add_subplot(1, 3, n, projection="3d"))
fig.savefig("plot3dkit_quick_reference.png", dpi=100)
print("Saved plot3dkit_quick_reference.png")
