"""Unit tests for pipeline configuration and result models."""

from pathlib import Path

import pytest

from subdedupe.engine import PipelineConfig, PipelineResult


@pytest.mark.unit
def test_pipeline_config_defaults() -> None:
    """Test PipelineConfig default values."""
    config = PipelineConfig()

    assert config.similarity_threshold == 0.75
    assert config.dry_run is False
    assert config.missing_amount_pass is True
    assert config.output_dir == Path("out")
    assert config.write_artifacts is True
    assert config.track_execution_time is False


@pytest.mark.unit
def test_pipeline_config_coerces_output_dir() -> None:
    """Test string output directories become paths."""
    config = PipelineConfig(output_dir="custom_out")  # type: ignore[arg-type]

    assert config.output_dir == Path("custom_out")


@pytest.mark.unit
@pytest.mark.parametrize(
    "threshold",
    [-0.1, 1.0, 1.5],
    ids=["negative", "one", "above_1"],
)
def test_pipeline_config_invalid_threshold(threshold: float) -> None:
    """Test out-of-range thresholds are rejected."""
    with pytest.raises(ValueError, match="similarity_threshold must be in"):
        PipelineConfig(similarity_threshold=threshold)


@pytest.mark.unit
def test_pipeline_config_zero_threshold_allowed() -> None:
    """Test a zero threshold is valid."""
    assert PipelineConfig(similarity_threshold=0.0).similarity_threshold == 0.0


@pytest.mark.unit
def test_pipeline_config_to_dict() -> None:
    """Test config serialization stringifies the output directory."""
    data = PipelineConfig(output_dir=Path("o"), dry_run=True).to_dict()

    assert data["output_dir"] == "o"
    assert data["dry_run"] is True
    assert data["similarity_threshold"] == 0.75


@pytest.mark.unit
def test_pipeline_result_defaults() -> None:
    """Test PipelineResult default values."""
    result = PipelineResult(success=True)

    assert result.total_records == 0
    assert result.failed_ids == []
    assert result.errors == []
    assert result.output_files == {}
    assert result.error_message is None
    assert result.to_dict()["success"] is True
