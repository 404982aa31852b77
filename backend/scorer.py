"""Rule-based SEO scorer.

Five independent checks worth 20 points each, evaluated in a fixed order so
the passed/issues lists are stable for identical input.
"""

from typing import Callable, NamedTuple

from models import ScoreResult, SeoSignals

MAX_SCORE = 100


class Check(NamedTuple):
    points: int
    passed: Callable[[SeoSignals], bool]
    pass_message: str
    fail_message: Callable[[SeoSignals], str]


CHECKS: tuple[Check, ...] = (
    Check(
        points=20,
        passed=lambda s: bool(s.title),
        pass_message="Page has a title tag",
        fail_message=lambda s: "Missing page title tag",
    ),
    Check(
        points=20,
        passed=lambda s: bool(s.meta_description),
        pass_message="Page has a meta description",
        fail_message=lambda s: "Missing meta description",
    ),
    Check(
        points=20,
        passed=lambda s: s.h1_count >= 1,
        pass_message="Page has at least one H1 tag",
        fail_message=lambda s: "No H1 tags found on the page",
    ),
    Check(
        points=20,
        passed=lambda s: s.total_images == 0 or s.images_missing_alt == 0,
        pass_message="All images have alt text",
        fail_message=lambda s: f"{s.images_missing_alt} image(s) missing alt text",
    ),
    Check(
        points=20,
        passed=lambda s: s.uses_https,
        pass_message="Page uses HTTPS",
        fail_message=lambda s: "Page does not use HTTPS",
    ),
)


def score_signals(signals: SeoSignals) -> ScoreResult:
    """Return the 0-100 score and categorized feedback for `signals`."""
    score = 0
    passed_checks: list[str] = []
    issues: list[str] = []

    for check in CHECKS:
        if check.passed(signals):
            score += check.points
            passed_checks.append(check.pass_message)
        else:
            issues.append(check.fail_message(signals))

    return ScoreResult(
        score=min(score, MAX_SCORE),
        passed_checks=tuple(passed_checks),
        issues=tuple(issues),
    )
