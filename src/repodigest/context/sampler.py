"""Budget sampler - decides which files enter the digest and in what form.

Candidates are visited in a fixed order:

  1. P0 files, in enumeration order
  2. P1 non-test files, in enumeration order
  3. P1 test files, then P2 test files, in enumeration order
  4. P2 non-test files, largest first

Selection is a fold over that order carrying an immutable BudgetLedger.
P0 files are taken in full and never dropped for budget; once the budget is
exhausted the fold stops at the first non-P0 candidate. At most
`max_test_files` test files are admitted, whatever their tier. P1 and P2
files larger than `max_file_size_bytes` are skipped without being read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from repodigest.config import SamplerConfig, SkeletonConfig
from repodigest.context.models import (
    BudgetLedger,
    SampleSet,
    SampleSummary,
    SourceSample,
    byte_size,
)
from repodigest.scanner.classifier import classify, is_source_file, is_test_file
from repodigest.scanner.models import FileRecord, PriorityTier, Representation
from repodigest.skeleton.extractor import skeletonize

logger = logging.getLogger("repodigest.sampler")

FileReader = Callable[[str], str]


@dataclass(frozen=True)
class Candidate:
    record: FileRecord
    tier: PriorityTier
    is_test: bool


def read_utf8(path: str) -> str:
    """Read a file as strict UTF-8."""
    return Path(path).read_text(encoding="utf-8")


def order_candidates(files: list[FileRecord]) -> list[Candidate]:
    """Classify files and arrange the eligible ones in sampling order.

    P0 files are always eligible; P1 and P2 files only when they are source
    code, so assets, manifests and lock files never compete for the budget.
    """
    p0: list[Candidate] = []
    p1: list[Candidate] = []
    p1_tests: list[Candidate] = []
    p2_tests: list[Candidate] = []
    p2: list[Candidate] = []

    for record in files:
        tier = classify(record.rel_path)
        if tier != PriorityTier.P0 and not is_source_file(record.rel_path):
            continue
        cand = Candidate(record=record, tier=tier, is_test=is_test_file(record.rel_path))
        if tier == PriorityTier.P0:
            p0.append(cand)
        elif tier == PriorityTier.P1:
            (p1_tests if cand.is_test else p1).append(cand)
        else:
            (p2_tests if cand.is_test else p2).append(cand)

    p2.sort(key=lambda c: c.record.size, reverse=True)
    return p0 + p1 + p1_tests + p2_tests + p2


def sample_files(
    files: list[FileRecord],
    config: SamplerConfig | None = None,
    skeleton_config: SkeletonConfig | None = None,
    read_file: FileReader = read_utf8,
) -> SampleSet:
    """Select samples for the digest within the byte budget.

    Args:
        files: Walked files in enumeration order.
        config: Budget, full-read threshold, test-file cap and file size limit.
        skeleton_config: Passed through to the skeleton extractor.
        read_file: Reads a file's text by absolute path. Any OSError or
            UnicodeDecodeError skips the candidate.
    """
    config = config or SamplerConfig()
    skeleton_config = skeleton_config or SkeletonConfig()

    candidates = order_candidates(files)
    ledger = BudgetLedger(budget=config.context_budget_bytes)
    summary = SampleSummary(budget_bytes=config.context_budget_bytes, candidates=len(candidates))
    samples: list[SourceSample] = []

    for cand in candidates:
        is_p0 = cand.tier == PriorityTier.P0
        if ledger.exhausted and not is_p0:
            break
        if cand.is_test and ledger.test_files >= config.max_test_files:
            summary.skipped_tests += 1
            continue
        if not is_p0 and cand.record.size > config.max_file_size_bytes:
            logger.debug("Skipping oversized %s (%d bytes)", cand.record.rel_path, cand.record.size)
            summary.skipped_oversized += 1
            continue

        try:
            raw = read_file(cand.record.path)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable %s: %s", cand.record.rel_path, e)
            summary.read_failures += 1
            continue

        sample = _represent(cand, raw, config, skeleton_config)
        size = byte_size(sample.content)
        if not is_p0 and not ledger.fits(size):
            summary.dropped_over_budget += 1
            continue

        ledger = ledger.charge(size, cand.is_test)
        samples.append(sample)
        _count(summary, sample)

    summary.budget_used_bytes = ledger.used_bytes
    return SampleSet(samples=samples, summary=summary)


def _represent(
    cand: Candidate, raw: str, config: SamplerConfig, skeleton_config: SkeletonConfig
) -> SourceSample:
    """Choose full text or skeleton for a candidate before the sample exists."""
    if cand.tier == PriorityTier.P0:
        full = True
    elif cand.tier == PriorityTier.P1:
        full = byte_size(raw) < config.full_read_threshold_bytes
    else:
        full = False

    if full:
        content, representation = raw, Representation.FULL
    else:
        content, representation = skeletonize(raw, cand.record.rel_path, skeleton_config), Representation.SKELETAL

    return SourceSample(
        path=cand.record.rel_path,
        tier=cand.tier,
        representation=representation,
        content=content,
        is_test=cand.is_test,
    )


def _count(summary: SampleSummary, sample: SourceSample) -> None:
    if sample.tier == PriorityTier.P0:
        summary.p0_count += 1
    elif sample.tier == PriorityTier.P1:
        summary.p1_count += 1
    else:
        summary.p2_count += 1
    if sample.representation == Representation.FULL:
        summary.full_count += 1
    else:
        summary.skeletal_count += 1
    if sample.is_test:
        summary.test_count += 1
