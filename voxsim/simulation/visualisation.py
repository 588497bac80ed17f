import numpy as np
import matplotlib
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from voxsim.kernel import Mesh, Voxels


# Setup for colours
color_fluid = "tab:blue"
color_solid = "dimgray"
color_patch = "orchid"
color_fixed = "tab:red"
color_force = "tab:blue"
cmap_displacement = "rainbow"

alpha_domain = 0.6
alpha_patch = 0.5


def create_axes_3d(figsize=(8, 6)):
    fig = plt.figure(figsize=figsize)
    ax = fig.add_subplot(projection="3d")
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    return fig, ax


def plot_mesh(ax, mesh: Mesh, color, alpha: float = 1.0):
    if not mesh.triangle_count:
        return None
    collection = Poly3DCollection(mesh.corners(), facecolor=color, edgecolor="none", alpha=alpha)
    ax.add_collection3d(collection)
    return collection


def plot_voxels(ax, voxels: Voxels, color, alpha: float = alpha_domain):
    mesh = Mesh.from_voxels(voxels)
    plot_mesh(ax, mesh, color, alpha)
    return mesh


def fit_view(ax, *meshes: Mesh):
    """Set equal axis limits enclosing all meshes."""
    points = [mesh.vertices for mesh in meshes if len(mesh.vertices)]
    if not points:
        return
    points = np.concatenate(points)
    lo = points.min(axis=0)
    hi = points.max(axis=0)
    center = 0.5 * (lo + hi)
    half = 0.5 * max(np.max(hi - lo), 1e-6)
    ax.set_xlim(center[0] - half, center[0] + half)
    ax.set_ylim(center[1] - half, center[1] + half)
    ax.set_zlim(center[2] - half, center[2] + half)


def save_figure(fig, path):
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def get_colormap(name: str = cmap_displacement):
    return matplotlib.colormaps[name]
