import logging
import math
from pathlib import Path
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray
from tqdm import tqdm

from data_types import DieMesh, EngravingRequest, ExportOptions, FaceVertexGroup, MissingVertexData, calculate_triangle_normals
from engraving import apply_engraving_request

logger = logging.getLogger(__name__)

HEADER_SIZE = 80
COUNT_SIZE = 4
RECORD_SIZE = 50
SOLID_NAME = "dice"

# One binary STL triangle record: normal, three corners, attribute byte count
STL_RECORD_DTYPE = np.dtype([
    ("normal", "<f4", (3,)),
    ("vertices", "<f4", (3, 3)),
    ("attribute", "<u2"),
])
assert STL_RECORD_DTYPE.itemsize == RECORD_SIZE

MIME_TYPES = {
    True: "application/octet-stream",
    False: "text/plain",
}


def triangle_count(mesh: DieMesh) -> int:
    """Triangles in the index buffer, or in the triangle-ordered positions when there is none."""
    if mesh.positions is None:
        raise MissingVertexData("Mesh does not have required vertex data")
    return mesh.triangle_count


def estimate_file_size(mesh: DieMesh) -> int:
    """Size in bytes of the binary STL for this mesh."""
    return RECORD_SIZE * triangle_count(mesh) + HEADER_SIZE + COUNT_SIZE


def format_file_size(size_bytes: int) -> str:
    """Human readable size, e.g. '0 Bytes', '512 Bytes', '1.5 KB'."""
    if size_bytes == 0:
        return "0 Bytes"
    k = 1024
    sizes = ["Bytes", "KB", "MB", "GB"]
    i = min(int(math.floor(math.log(size_bytes) / math.log(k))), len(sizes) - 1)
    value = round(size_bytes / k ** i, 2)
    return f"{value:g} {sizes[i]}"


def mime_type(options: ExportOptions) -> str:
    return MIME_TYPES[bool(options.binary)]


def resolve_triangles(mesh: DieMesh) -> tuple[NDArray[np.float32], NDArray[np.float32]]:
    """
    Corners and normals of every triangle of a mesh, ready to be written.

    When the mesh carries vertex normals, the normal of a triangle is the stored
    normal of its first corner. This is exact for flat shaded meshes where all
    three corners share a normal. Without vertex normals the normal is
    normalize(cross(v2 - v1, v3 - v1)) in winding order.

    Returns:
        tuple: (F x 3 x 3 corner positions, F x 3 normals), both float32
    """
    if mesh.positions is None:
        raise MissingVertexData("Mesh does not have required vertex data")

    triangle_indices = mesh.triangle_indices()
    corners = mesh.positions[triangle_indices]
    if mesh.normals is not None:
        normals = mesh.normals[triangle_indices[:, 0]]
    else:
        normals = calculate_triangle_normals(corners)
    return corners.astype(np.float32), normals.astype(np.float32)


def to_binary_stl(mesh: DieMesh) -> bytes:
    """
    Serialize a mesh to binary STL.

    Layout (little-endian): 80 zero bytes of header, uint32 triangle count,
    then one 50 byte record per triangle. The result is exactly
    84 + 50 * triangle_count bytes long.
    """
    corners, normals = resolve_triangles(mesh)
    count = len(corners)

    records = np.zeros(count, dtype=STL_RECORD_DTYPE)
    records["normal"] = normals
    records["vertices"] = corners

    header = bytes(HEADER_SIZE)
    data = header + np.array(count, dtype="<u4").tobytes() + records.tobytes()
    assert len(data) == HEADER_SIZE + COUNT_SIZE + RECORD_SIZE * count
    return data


def format_vector(vector) -> str:
    return " ".join(f"{float(value):.6f}" for value in vector)


def to_ascii_stl(mesh: DieMesh, progress: bool = False) -> str:
    """Serialize a mesh to ASCII STL, every coordinate with 6 decimals."""
    corners, normals = resolve_triangles(mesh)

    lines = [f"solid {SOLID_NAME}"]
    for i in tqdm(range(len(corners)), desc="Writing ASCII STL", disable=not progress):
        lines.append(f"  facet normal {format_vector(normals[i])}")
        lines.append("    outer loop")
        for corner in corners[i]:
            lines.append(f"      vertex {format_vector(corner)}")
        lines.append("    endloop")
        lines.append("  endfacet")
    lines.append(f"endsolid {SOLID_NAME}")
    return "\n".join(lines) + "\n"


def serialize(mesh: DieMesh, options: Optional[ExportOptions] = None) -> Union[bytes, str]:
    """
    Binary STL bytes or ASCII STL text depending on options.binary.

    Triangle normals come from the first corner's stored normal, which engraving
    does not update. Pass engraved meshes through prepare_export_mesh or
    DieMesh.flat_shaded first so the written normals match the moved geometry.
    """
    if options is None:
        options = ExportOptions()
    if options.binary:
        return to_binary_stl(mesh)
    return to_ascii_stl(mesh)


def prepare_export_mesh(
    mesh: DieMesh,
    face_group: Optional[FaceVertexGroup] = None,
    requests: tuple[EngravingRequest, ...] = (),
    options: Optional[ExportOptions] = None,
) -> DieMesh:
    """
    Snapshot of a mesh ready for export, leaving the input untouched.

    Engravings are applied to the snapshot only when options.include_displacement
    is set. The snapshot is then flat shaded so every corner of a triangle
    carries that triangle's recomputed normal.
    """
    if options is None:
        options = ExportOptions()
    if mesh.positions is None:
        raise MissingVertexData("Mesh does not have required vertex data")

    snapshot = mesh.copy()
    if options.include_displacement:
        for request in requests:
            apply_engraving_request(snapshot, face_group, request)
    return snapshot.flat_shaded()


def export_stl(mesh: DieMesh, filepath: Union[str, Path], options: Optional[ExportOptions] = None, progress: bool = False) -> Path:
    """
    Write a mesh to an .stl file and return the path written.

    The whole file content is produced before the file is opened, so a failure
    never leaves a partial file behind.
    """
    if options is None:
        options = ExportOptions()
    filepath = Path(filepath)
    if filepath.suffix.lower() != ".stl":
        filepath = filepath.with_name(filepath.name + ".stl")

    if options.binary:
        content = to_binary_stl(mesh)
        filepath.write_bytes(content)
    else:
        content = to_ascii_stl(mesh, progress=progress)
        filepath.write_text(content, encoding="utf-8")

    logger.info("Wrote %s STL with %d triangles to %s (%s)", "binary" if options.binary else "ASCII",
                triangle_count(mesh), filepath, format_file_size(len(content)))
    return filepath
