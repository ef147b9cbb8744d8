from .die_plotting import plot_die_mesh, plot_displacement_map
