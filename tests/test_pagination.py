import json
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from movie_collage.compositor import FrameCompositor
from movie_collage.config import CollageConfig, LayoutSettings, load_config
from movie_collage.errors import CollageGenerationError, FrameWriteError, LayoutError
from movie_collage.models import HistoryEntry, MovieDetails
from movie_collage.pagination import CollageGenerator, plan_frames, posters_per_frame


def fake_lookup(movie_id: int) -> MovieDetails:
    return MovieDetails(movie_id=movie_id, vote_average=6.0, runtime=90)


def make_history(count: int) -> List[HistoryEntry]:
    start = datetime(2025, 1, 1, 12, 0, 0)
    return [
        HistoryEntry(watched_at=start + timedelta(days=index), title=f"Film {index}", tmdb_id=index + 1)
        for index in range(count)
    ]


def build_generator(tmp_path: Path, layout: LayoutSettings) -> CollageGenerator:
    logger = logging.getLogger("pagination-tests")
    compositor = FrameCompositor(
        layout,
        CollageConfig(title="Test", year=2025),
        fake_lookup,
        image_dir=tmp_path / "images",
        output_dir=tmp_path / "output",
        logger=logger,
    )
    return CollageGenerator(compositor, logger=logger)


def test_default_layout_fits_twelve_posters():
    assert posters_per_frame(LayoutSettings()) == 12


def test_short_canvas_fits_two_rows():
    assert posters_per_frame(LayoutSettings(canvas_height=1200)) == 6


def test_too_small_canvas_fits_nothing():
    assert posters_per_frame(LayoutSettings(canvas_height=600)) == 0


@pytest.mark.parametrize("poster_height, spacing", [(0, 0), (5, -5), (-20, 10)])
def test_zero_row_height_is_a_layout_error(poster_height, spacing):
    layout = LayoutSettings(poster_height=poster_height, poster_spacing_y=spacing)
    with pytest.raises(LayoutError):
        posters_per_frame(layout)


def test_zero_row_height_from_config_stops_generation(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"layout": {"poster_height": 0, "poster_spacing_y": 0}}), encoding="utf-8")
    layout = load_config(config_path, {}).layout

    with pytest.raises(LayoutError):
        build_generator(tmp_path, layout).generate(make_history(2))

    assert not (tmp_path / "output").exists()


@pytest.mark.parametrize("total, per_frame", [(0, 12), (1, 12), (12, 12), (13, 12), (25, 6), (7, 1)])
def test_plan_frames_partitions_history(total, per_frame):
    frames = plan_frames(total, per_frame)

    covered = [index for frame in frames for index in range(frame.start, frame.end)]
    assert covered == list(range(total))
    assert [frame.frame_number for frame in frames] == list(range(1, len(frames) + 1))
    assert all(frame.size == per_frame for frame in frames[:-1])
    if frames:
        assert 1 <= frames[-1].size <= per_frame


@pytest.mark.parametrize("per_frame", [0, -3])
def test_plan_frames_rejects_non_positive_capacity(per_frame):
    with pytest.raises(LayoutError):
        plan_frames(5, per_frame)


def test_generate_splits_into_parts(tmp_path):
    generator = build_generator(tmp_path, LayoutSettings(canvas_height=1200))

    result = generator.generate(make_history(10))

    assert result.posters_per_frame == 6
    assert [frame.frame_slice.size for frame in result.frames] == [6, 4]
    assert [path.name for path in result.output_paths] == [
        "movie_collage_2025_part_1.png",
        "movie_collage_2025_part_2.png",
    ]
    assert all(path.exists() for path in result.output_paths)
    assert result.frames[0].stats.count == 6
    assert result.frames[1].stats.count == 4
    assert result.frames[1].stats.total_hours == 6.0


def test_generate_single_frame_has_no_part_suffix(tmp_path):
    generator = build_generator(tmp_path, LayoutSettings(canvas_height=1200))

    result = generator.generate(make_history(6))

    assert [path.name for path in result.output_paths] == ["movie_collage_2025.png"]
    assert result.frames[0].total_frames == 1


def test_generate_empty_history_writes_nothing(tmp_path):
    generator = build_generator(tmp_path, LayoutSettings())

    result = generator.generate([])

    assert result.frames == []
    assert not (tmp_path / "output").exists()


def test_generate_rejects_degenerate_layout(tmp_path):
    generator = build_generator(tmp_path, LayoutSettings(canvas_height=600))

    with pytest.raises(LayoutError):
        generator.generate(make_history(3))

    assert not (tmp_path / "output").exists()


def test_generate_reports_failing_frame_number(tmp_path):
    generator = build_generator(tmp_path, LayoutSettings(canvas_height=1200))
    compositor = generator.compositor
    original_save = compositor.save

    def failing_save(canvas, path):
        if path.name.endswith("_part_2.png"):
            raise FrameWriteError("disk full")
        original_save(canvas, path)

    compositor.save = failing_save

    with pytest.raises(CollageGenerationError) as excinfo:
        generator.generate(make_history(10))

    assert excinfo.value.frame_number == 2
    assert "error generating frame 2" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, FrameWriteError)
    assert (tmp_path / "output" / "movie_collage_2025_part_1.png").exists()
    assert not (tmp_path / "output" / "movie_collage_2025_part_2.png").exists()
