"""
Static category table for the morning report.

Read-only for the lifetime of the process: a tuple of frozen
CategoryConfig records, in report order.
"""
from types import MappingProxyType
from typing import Mapping, Tuple

from morning_report.models import CategoryConfig


CATEGORY_CONFIG: Tuple[CategoryConfig, ...] = (
    CategoryConfig(
        id="world_major_incidents",
        title="Store cyberhendelser globalt",
        queries=(
            "major cyber incident site:reuters.com OR site:apnews.com OR site:bbc.com",
            "CISA alert OR advisory site:cisa.gov",
            "widespread ransomware outage",
        ),
    ),
    CategoryConfig(
        id="norway_incidents",
        title="Hendelser i Norge/norske mål",
        queries=("Norway cyber attack OR Norge dataangrep OR NSM",),
    ),
    CategoryConfig(
        id="key_reports",
        title="Viktige rapporter",
        queries=("cybersecurity annual report OR trusselvurdering OR whitepaper",),
    ),
    CategoryConfig(
        id="cyberforsvaret_social",
        title="SoMe: Cyberforsvaret",
        queries=('"Cyberforsvaret" OR "Norwegian Armed Forces Cyber Defence"',),
    ),
    CategoryConfig(
        id="milno_targeting",
        title="Omtale/angrep mot mil.no",
        queries=('"mil.no" cyber attack OR target OR phishing',),
    ),
    CategoryConfig(
        id="cyberforsvaret_media",
        title="Norske medier: Cyberforsvaret",
        queries=(
            "Cyberforsvaret site:nrk.no OR site:aftenposten.no OR site:vg.no "
            "OR site:dn.no OR site:e24.no",
        ),
    ),
    CategoryConfig(
        id="mil_ops_analysis",
        title="Analyser: cyber i militære operasjoner",
        queries=(
            "offensive cyber in military operations analysis",
            "defensive cyber doctrine electronic warfare",
        ),
    ),
)

CATEGORY_TITLES: Mapping[str, str] = MappingProxyType(
    {category.id: category.title for category in CATEGORY_CONFIG}
)
