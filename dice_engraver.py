import argparse
import logging
import os
import sys

import matplotlib.pyplot as plt

from data_types import DiceEngraverError, EngravingRequest, ExportOptions, RESOLUTIONS
from displacement import generate_displacement_map
from engraving import DEFAULT_STRENGTH
from export import estimate_file_size, export_stl, format_file_size, mime_type, prepare_export_mesh
from geometry import GRID_SUBDIVISIONS, build_mesh, resolution_multiplier
from plotting import plot_die_mesh, plot_displacement_map
from validation import validate_dice_type, validate_image_file, validate_text_input


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Engrave text, an image or a gradient into a die and export it as STL.')
    parser.add_argument('save_filepath', type=str, help='Path of the STL file to write')
    parser.add_argument('--type', '-t', dest='dice_type', default='D6', help='Die type: D4, D6, D8, D10, D12 or D20')
    parser.add_argument('--face', '-f', type=int, default=0, help='Index of the face to engrave (D6 only, 0-5)')
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--text', type=str, help='Text to engrave (1-2 letters or digits)')
    source.add_argument('--image', type=str, help='PNG image to engrave')
    source.add_argument('--gradient', action='store_true', help='Engrave a radial gradient')
    parser.add_argument('--strength', '-s', type=float, default=DEFAULT_STRENGTH, help='Engraving depth in mesh units')
    parser.add_argument('--resolution', choices=RESOLUTIONS, default='medium', help='Subdivision density of the cube faces')
    parser.add_argument('--ascii', action='store_true', help='Write an ASCII STL instead of a binary one')
    parser.add_argument('--no-displacement', action='store_true', help='Export the plain die without the engraving')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output with visualizations')
    return parser.parse_args(argv)


def validate_args(args):
    """Returns the list of input errors, empty when the arguments are usable."""
    errors = []
    errors += validate_dice_type(args.dice_type.upper()).errors
    if args.text is not None:
        errors += validate_text_input(args.text).errors
    if args.image is not None:
        errors += validate_image_file(args.image).errors
    if args.strength <= 0:
        errors.append(f"Strength must be positive. Got: {args.strength}")

    save_dir = os.path.dirname(os.path.abspath(args.save_filepath))
    if not os.path.isdir(save_dir):
        errors.append(f"The directory {save_dir} does not exist.")
    return errors


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    errors = validate_args(args)
    if errors:
        for error in errors:
            print(f"Error: {error}")
        sys.exit(1)

    options = ExportOptions(resolution=args.resolution, binary=not args.ascii,
                            include_displacement=not args.no_displacement)
    grid = GRID_SUBDIVISIONS * resolution_multiplier(options.resolution)
    mesh, face_group = build_mesh(args.dice_type, grid=grid)

    requests = ()
    try:
        if args.text or args.image or args.gradient:
            displacement_map = generate_displacement_map(text=args.text, image=args.image, gradient=args.gradient)
            requests = (EngravingRequest(face_index=args.face, strength=args.strength, source=displacement_map),)
            if args.verbose:
                plot_displacement_map(displacement_map)

        export_mesh = prepare_export_mesh(mesh, face_group, requests, options)
        print(f"Estimated file size: {format_file_size(estimate_file_size(export_mesh))}")
        filepath = export_stl(export_mesh, args.save_filepath, options, progress=args.verbose)
    except DiceEngraverError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Saved {filepath} ({mime_type(options)}, {format_file_size(os.path.getsize(filepath))})")

    if args.verbose:
        plot_die_mesh(export_mesh, title=f"{args.dice_type.upper()} ({export_mesh.triangle_count} triangles)")
        plt.show()


if __name__ == "__main__":
    main()
