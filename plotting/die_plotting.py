import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Patch
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from data_types import DieMesh, DisplacementMap, FaceVertexGroup


def plot_die_mesh(mesh: DieMesh, face_group: FaceVertexGroup = None, highlight_face: int = None,
                  title="Die Mesh", figsize=(10, 8), base_color='skyblue', highlight_color='orange',
                  edge_color='black', edge_width=0.2, alpha=0.9, ax=None):
    """
    Plots a die mesh, optionally highlighting the triangles of one engravable face.

    Parameters
    ----------
    mesh : DieMesh
        The die to draw.

    face_group : FaceVertexGroup, optional
        Face vertex groups built with the mesh. Needed to highlight a face.

    highlight_face : int, optional
        Index of the face to color with highlight_color.

    title : str, optional
        Title for the plot. Default is "Die Mesh".

    ax : matplotlib.axes.Axes, optional
        Existing 3D axes to plot on. If None, new figure and axes are created.

    Returns
    -------
    fig : matplotlib.figure.Figure
        The figure containing the plot.

    ax : matplotlib.axes.Axes
        The 3D axes containing the plot.
    """
    if ax is None:
        fig = plt.figure(figsize=figsize)
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.figure

    triangle_indices = mesh.triangle_indices()
    face_colors = np.full(len(triangle_indices), base_color, dtype=object)

    legend_elements = [Patch(facecolor=base_color, edgecolor=edge_color, label="Die")]
    if face_group is not None and highlight_face in face_group:
        face_vertices = np.asarray(face_group[highlight_face])
        in_face = np.isin(triangle_indices, face_vertices).all(axis=1)
        face_colors[in_face] = highlight_color
        legend_elements.append(Patch(facecolor=highlight_color, edgecolor=edge_color, label=f"Face {highlight_face}"))

    poly3d = Poly3DCollection(mesh.triangles(), linewidths=edge_width, edgecolors=edge_color, alpha=alpha)
    poly3d.set_facecolor(list(face_colors))
    ax.add_collection3d(poly3d)
    ax.legend(handles=legend_elements, loc='upper right', frameon=True, fancybox=True, framealpha=0.7)

    ax.set_title(title)
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    ax.set_box_aspect([1, 1, 1])

    (x_min, y_min, z_min), (x_max, y_max, z_max) = mesh.bounds
    buffer = max(x_max - x_min, y_max - y_min, z_max - z_min) * 0.05
    ax.set_xlim(x_min - buffer, x_max + buffer)
    ax.set_ylim(y_min - buffer, y_max + buffer)
    ax.set_zlim(z_min - buffer, z_max + buffer)

    plt.tight_layout()
    return fig, ax


def plot_displacement_map(displacement_map: DisplacementMap, title="Displacement Map", figsize=(6, 6), ax=None):
    """Shows the red channel of a displacement map, with the UV origin at the bottom left."""
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    ax.imshow(displacement_map.red, cmap='gray', vmin=0, vmax=255, origin='lower', extent=(0, 1, 0, 1))
    ax.set_title(title)
    ax.set_xlabel("U")
    ax.set_ylabel("V")
    return fig, ax
