"""Tests for the MagicaVoxel placement-list export."""

import pytest

from caldera.core import Dimensions, Point, StateName
from caldera.export import ExportError, HEADER_COMMENT, render_mv_import, write_mv_import

GROUND = StateName("ground")
SKY = StateName("sky")


@pytest.fixture
def cells():
    return [
        (Point(0, 0, 0), GROUND),
        (Point(1, 0, 0), GROUND),
        (Point(0, 0, 1), SKY),
        (Point(1, 0, 1), SKY),
    ]


class TestRender:

    def test_header(self, cells, temp_data_dir):
        lines = render_mv_import(cells, Dimensions(2, 1, 2), tile_size=3, vox_dir=temp_data_dir)
        assert lines[0] == HEADER_COMMENT
        assert lines[1] == "mv_import 6"
        assert len(lines) == 6

    def test_offsets_scale_with_tile_size(self, cells, temp_data_dir):
        lines = render_mv_import(cells, Dimensions(2, 1, 2), tile_size=5, vox_dir=temp_data_dir)
        ground = (temp_data_dir / "ground.vox").resolve()
        sky = (temp_data_dir / "sky.vox").resolve()

        assert lines[1] == "mv_import 10"
        assert lines[2:] == [
            f"0 0 0 {ground}",
            f"5 0 0 {ground}",
            f"0 0 5 {sky}",
            f"5 0 5 {sky}",
        ]

    def test_import_size_uses_longest_side(self, temp_data_dir):
        lines = render_mv_import([(Point(0, 0, 0), GROUND)], Dimensions(2, 7, 3), vox_dir=temp_data_dir)
        assert lines[1] == "mv_import 21"

    def test_paths_are_absolute(self, cells):
        lines = render_mv_import(cells, Dimensions(2, 1, 2), vox_dir="states")
        for line in lines[2:]:
            path = line.split(" ", 3)[3]
            assert path.startswith("/")
            assert path.endswith(".vox")

    def test_unobserved_cell_rejected(self, temp_data_dir):
        with pytest.raises(ExportError) as exc_info:
            render_mv_import([(Point(0, 0, 0), GROUND), (Point(1, 0, 0), None)], Dimensions(2, 1, 1))
        assert exc_info.value.point == Point(1, 0, 0)


class TestWrite:

    def test_writes_file(self, cells, temp_data_dir):
        path = write_mv_import(cells, Dimensions(2, 1, 2), temp_data_dir / "out" / "map.txt",
                               vox_dir=temp_data_dir)

        assert path.exists()
        text = path.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert text.splitlines()[0] == HEADER_COMMENT
        assert len(text.splitlines()) == 6

    def test_failed_export_writes_nothing(self, temp_data_dir):
        output = temp_data_dir / "map.txt"
        with pytest.raises(ExportError):
            write_mv_import([(Point(0, 0, 0), None)], Dimensions(1, 1, 1), output)
        assert not output.exists()

    def test_unwritable_path_raises(self, cells, temp_data_dir):
        blocker = temp_data_dir / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(OSError):
            write_mv_import(cells, Dimensions(2, 1, 2), blocker / "map.txt", vox_dir=temp_data_dir)
