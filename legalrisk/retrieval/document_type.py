"""Coarse document-type detection by keyword.

Rules are checked in order and the first match wins, so a text mentioning
both confidentiality and employment is classified as an NDA.
"""

DEFAULT_DOCUMENT_TYPE = "Legal Document"

_RULES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    # (label, any-of groups; every group must have at least one hit)
    ("NDA", (("non-disclosure", "confidentiality"),)),
    ("Employment Contract", (("employment", "job", "salary"),)),
    ("Service Agreement", (("service",), ("agreement",))),
    ("Lease Agreement", (("lease", "rental"),)),
    ("Purchase Agreement", (("purchase", "sale"),)),
    ("License Agreement", (("license",),)),
)


def detect_document_type(text: str) -> str:
    content = text.lower()
    for label, groups in _RULES:
        if all(any(keyword in content for keyword in group) for group in groups):
            return label
    return DEFAULT_DOCUMENT_TYPE
