"""Record recoverable per-entry problems.

Resolvers never print. Each skipped entry becomes a
:class:`~oasir.models.Diagnostic` appended to the caller's list and is also
logged at WARNING level on the ``oasir.parser`` logger hierarchy.
"""

from __future__ import annotations

import logging
from typing import Optional

from oasir.models import Diagnostic, DiagnosticKind

logger = logging.getLogger(__name__)


def report(
    diagnostics: Optional[list[Diagnostic]],
    kind: DiagnosticKind,
    subject: str,
    message: str,
) -> Diagnostic:
    """Log a warning and append a :class:`~oasir.models.Diagnostic`.

    Args:
        diagnostics: The collecting list, or ``None`` to only log.
        kind: What kind of entry failed.
        subject: Identity of the entry (``"Pet"``, ``"GET /pets"``).
        message: What went wrong.

    Returns:
        The recorded diagnostic.
    """
    diagnostic = Diagnostic(kind=kind, subject=subject, message=message)
    logger.warning("Skipping %s %s: %s", kind.value, subject, message)
    if diagnostics is not None:
        diagnostics.append(diagnostic)
    return diagnostic
