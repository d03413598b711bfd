"""End-to-end cleanup pipeline runner.

Chains the five stages of a cleanup run into a single deterministic,
auditable pipeline.

Architecture Flow:
    Stage 1: Load snapshot
    Stage 2: Junk classification
    Stage 3: Similarity clustering
    Stage 4: Resolution (survivor selection, field updates, plan)
    Stage 5: Execution (or dry-run validation)

Stages 2-4 never touch the store; only stage 5 talks to the executor.
"""

import json
import time
import traceback
from pathlib import Path
from typing import Any

from subdedupe.audit.logger import AuditLogger
from subdedupe.clustering import Cluster, build_clusters
from subdedupe.engine.config import PipelineConfig, PipelineResult
from subdedupe.junk import JunkClassifier, JunkRule
from subdedupe.models import SubsidyRecord
from subdedupe.resolve import (
    CleanupPlan,
    assemble_plan,
    deleted_ids,
    detect_junk,
    propose_updates,
    resolve_clusters,
)
from subdedupe.scoring import CompletenessScorer
from subdedupe.store import (
    ChangeExecutor,
    ExecutionResult,
    LoaderError,
    RecordLoader,
    validate_plan,
)

__all__ = ["PLAN_ARTIFACT", "SUMMARY_REPORT", "run_pipeline"]

PLAN_ARTIFACT = Path("artifacts") / "cleanup_plan.json"
SUMMARY_REPORT = Path("reports") / "cleanup_summary.json"


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False, sort_keys=True)
        f.write("\n")


def _report_failures(
    results: list[ExecutionResult],
    logger: AuditLogger | None,
) -> tuple[list[str], list[dict[str, str]]]:
    failed_ids: list[str] = []
    errors: list[dict[str, str]] = []
    for result in results:
        for error in result.errors:
            failed_ids.append(error.id)
            errors.append({"operation": result.operation, **error.to_dict()})
            if logger:
                logger.execution_failed(
                    rid=error.id,
                    operation=result.operation,
                    message=error.message,
                    stage="stage5_execute",
                )
    return failed_ids, errors


# ---------------------------------------------------------------------------
# Individual stage functions
# ---------------------------------------------------------------------------


def _stage1_load(store: RecordLoader, logger: AuditLogger | None) -> list[SubsidyRecord]:
    """Stage 1: Load the full snapshot."""
    if logger:
        logger.event("stage1_load_started", stage="stage1_load")

    records = store.load_all()

    if logger:
        logger.event(
            "stage1_load_complete",
            stage="stage1_load",
            data={"records_count": len(records)},
        )

    return records


def _stage2_classify_junk(
    records: list[SubsidyRecord],
    config: PipelineConfig,
    logger: AuditLogger | None,
) -> tuple[list[tuple[SubsidyRecord, JunkRule]], list[SubsidyRecord]]:
    """Stage 2: Split off junk records."""
    if logger:
        logger.set_stage("stage2_junk")
        logger.event("stage2_junk_started")

    classifier = JunkClassifier(missing_amount_pass=config.missing_amount_pass)
    junk, survivors = detect_junk(records, classifier, logger)

    if logger:
        logger.event(
            "stage2_junk_complete",
            data={"junk_count": len(junk), "remaining": len(survivors)},
        )

    return junk, survivors


def _stage3_cluster(
    survivors: list[SubsidyRecord],
    config: PipelineConfig,
    logger: AuditLogger | None,
) -> list[Cluster]:
    """Stage 3: Star clustering by title similarity."""
    if logger:
        logger.set_stage("stage3_cluster")
        logger.event("stage3_cluster_started")

    clusters = build_clusters(survivors, threshold=config.similarity_threshold)

    if logger:
        logger.event(
            "stage3_cluster_complete",
            data={
                "clusters_total": len(clusters),
                "duplicate_clusters": sum(1 for c in clusters if c.is_duplicate),
            },
        )

    return clusters


def _stage4_resolve(
    total_records: int,
    junk: list[tuple[SubsidyRecord, JunkRule]],
    survivors: list[SubsidyRecord],
    clusters: list[Cluster],
    logger: AuditLogger | None,
) -> CleanupPlan:
    """Stage 4: Pick survivors, propose updates, assemble the plan."""
    if logger:
        logger.set_stage("stage4_resolve")
        logger.event("stage4_resolve_started")

    resolutions = resolve_clusters(clusters, CompletenessScorer(), logger)
    updates = propose_updates(survivors, deleted_ids(junk, resolutions), logger=logger)
    plan = assemble_plan(total_records, junk, clusters, resolutions, updates)

    if logger:
        logger.event(
            "stage4_resolve_complete",
            data={
                "to_delete": len(plan.deletions),
                "duplicates": plan.duplicate_count,
                "updates": len(plan.updates),
            },
        )

    return plan


def _stage5_execute(
    plan: CleanupPlan,
    executor: ChangeExecutor,
    dry_run: bool,
    logger: AuditLogger | None,
) -> tuple[ExecutionResult, ExecutionResult]:
    """Stage 5: Apply (or validate) deletions, then updates."""
    if logger:
        logger.set_stage("stage5_execute")
        logger.event("stage5_execute_started", data={"dry_run": dry_run})

    deletes = executor.delete(plan.to_delete, dry_run=dry_run)
    updates = executor.update(plan.updates, dry_run=dry_run)

    if logger:
        logger.event(
            "stage5_execute_complete",
            data={
                "dry_run": dry_run,
                "deleted": len(deletes.succeeded),
                "updated": len(updates.succeeded),
                "failed": len(deletes.failed) + len(updates.failed),
            },
        )

    return deletes, updates


# ---------------------------------------------------------------------------
# Pipeline runner
# ---------------------------------------------------------------------------


def _run_stages(
    store: RecordLoader,
    executor: ChangeExecutor,
    config: PipelineConfig,
    logger: AuditLogger | None,
) -> PipelineResult:
    """Execute all stages sequentially.

    Accumulates partial results so that diagnostic information is
    preserved even when a late stage fails.
    """
    start_time = time.perf_counter() if config.track_execution_time else None
    result = PipelineResult(success=False, dry_run=config.dry_run)

    try:
        records = _stage1_load(store, logger)
    except LoaderError as e:
        if logger:
            logger.error(exception_class=type(e).__name__, message=str(e), stage="stage1_load")
        result.error_message = str(e)
        return result

    result.total_records = len(records)

    try:
        junk, survivors = _stage2_classify_junk(records, config, logger)
        result.junk_detected = len(junk)

        clusters = _stage3_cluster(survivors, config, logger)

        plan = _stage4_resolve(len(records), junk, survivors, clusters, logger)
        result.clusters_found = plan.clusters_found

        plan_dict = plan.to_dict()
        validate_plan(plan_dict)

        if config.write_artifacts:
            plan_path = config.output_dir / PLAN_ARTIFACT
            _write_json(plan_path, plan_dict)
            result.output_files["cleanup_plan"] = str(plan_path)

        deletes, updates = _stage5_execute(plan, executor, config.dry_run, logger)
        result.records_deleted = len(deletes.succeeded)
        result.records_updated = len(updates.succeeded)
        result.failed_ids, result.errors = _report_failures([deletes, updates], logger)
        result.success = True

    except Exception as e:
        result.error_message = f"{type(e).__name__}: {e}"
        if logger:
            logger.event(
                "pipeline_error",
                stage="pipeline",
                data={"error": result.error_message, "traceback": traceback.format_exc()},
                level="ERROR",
            )
        return result

    finally:
        if logger:
            logger.set_stage(None)

    if start_time is not None:
        result.execution_time_seconds = time.perf_counter() - start_time

    if config.write_artifacts:
        summary_path = config.output_dir / SUMMARY_REPORT
        result.output_files["cleanup_summary"] = str(summary_path)
        _write_json(
            summary_path,
            {
                **result.to_dict(),
                "plan": plan_dict["counts"],
                "config": config.to_dict(),
            },
        )

    return result


def run_pipeline(
    store: RecordLoader,
    config: PipelineConfig | None = None,
    logger: AuditLogger | None = None,
    executor: ChangeExecutor | None = None,
) -> PipelineResult:
    """Run the complete cleanup pipeline.

    Parameters
    ----------
    store : RecordLoader
        Source of the record snapshot.
    config : PipelineConfig | None, optional
        Pipeline configuration. If None, uses defaults.
    logger : AuditLogger | None, optional
        Audit logger for tracking. If None, no logging.
    executor : ChangeExecutor | None, optional
        Applies the plan; defaults to ``store``.

    Returns
    -------
    PipelineResult
        Pipeline execution results. A loader failure gives
        ``success=False``; per-id execution failures do not.

    Raises
    ------
    TypeError
        If no change executor is given and ``store`` is not one.

    Examples
    --------
    Validate a cleanup without touching the store:

        >>> from subdedupe.engine import PipelineConfig, run_pipeline
        >>> from subdedupe.store import JsonlRecordStore
        >>> result = run_pipeline(
        ...     JsonlRecordStore("subsidies.jsonl"),
        ...     config=PipelineConfig(dry_run=True),
        ... )
        >>> result.records_deleted, result.records_updated
    """
    if config is None:
        config = PipelineConfig()

    if executor is None:
        if not isinstance(store, ChangeExecutor):
            raise TypeError(f"{type(store).__name__} cannot apply changes; pass an executor")
        executor = store

    return _run_stages(store, executor, config, logger)
