"""Folds SSL and security-header signals into a letter grade."""
import logging
from typing import Tuple

from models.report import SecurityAssessment, SecurityHeaderFindings

logger = logging.getLogger(__name__)

BASE_SCORE = 100
SSL_PENALTY = 30
SSL_ISSUE = ("SSL certificate is invalid or missing", "Install a valid SSL certificate")

# (findings attribute, penalty, issue, recommendation), applied in this order
HEADER_PENALTIES: Tuple[Tuple[str, int, str, str], ...] = (
    ("strict_transport_security", 10,
     "Missing Strict-Transport-Security header", "Add HSTS header to enforce HTTPS"),
    ("x_frame_options", 10,
     "Missing X-Frame-Options header", "Add X-Frame-Options to prevent clickjacking"),
    ("content_security_policy", 10,
     "Missing Content-Security-Policy header", "Implement CSP to prevent XSS attacks"),
    ("x_content_type_options", 5,
     "Missing X-Content-Type-Options header", "Add X-Content-Type-Options: nosniff"),
)

# Lowest score that still earns each grade, best first
GRADE_THRESHOLDS: Tuple[Tuple[int, str], ...] = (
    (90, "A+"),
    (80, "A"),
    (70, "B"),
    (60, "C"),
    (50, "D"),
)
FAILING_GRADE = "F"


def score_to_grade(score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return FAILING_GRADE


def calculate_security_grade(ssl_valid: bool, headers: SecurityHeaderFindings) -> SecurityAssessment:
    """
    Start from 100 and deduct a fixed penalty per missing signal.

    Every deduction emits exactly one issue and one recommendation, so the
    two lists stay paired by index.
    """
    score = BASE_SCORE
    issues = []
    recommendations = []

    if not ssl_valid:
        score -= SSL_PENALTY
        issues.append(SSL_ISSUE[0])
        recommendations.append(SSL_ISSUE[1])

    for attribute, penalty, issue, recommendation in HEADER_PENALTIES:
        if not getattr(headers, attribute):
            score -= penalty
            issues.append(issue)
            recommendations.append(recommendation)

    score = max(score, 0)
    grade = score_to_grade(score)
    logger.debug(f"Security score {score} -> {grade} ({len(issues)} issues)")
    return SecurityAssessment(
        grade=grade,
        score=score,
        issues=tuple(issues),
        recommendations=tuple(recommendations),
    )
