# natalchart/core/aspects.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import math

from natalchart.core.constants import ASPECT_ANGLES_DEG, DEFAULT_ORBS_DEG

__all__ = [
    "AspectKind",
    "AspectHit",
    "ASPECT_KINDS",
    "aspect_kinds",
    "angular_separation",
    "compute_aspects",   # PURE geometry function (sorted list of hits)
]

# ─────────────────────────────────────────────────────────────────────────────
# Core math helpers
# ─────────────────────────────────────────────────────────────────────────────

def angular_separation(a: float, b: float) -> float:
    """Separation of two longitudes folded to [0, 180]."""
    d = abs(float(a) - float(b))
    return 360.0 - d if d > 180.0 else d

# ─────────────────────────────────────────────────────────────────────────────
# Aspect catalog
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AspectKind:
    name: str
    angle: float
    orb: float      # tolerance: a hit needs |separation - angle| <= orb

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


ASPECT_KINDS: Tuple[AspectKind, ...] = tuple(
    AspectKind(name, angle, DEFAULT_ORBS_DEG[name]) for name, angle in ASPECT_ANGLES_DEG.items()
)


def aspect_kinds(orbs: Optional[Mapping[str, float]] = None) -> Tuple[AspectKind, ...]:
    """Canonical kinds with optional per-name orb overrides (order preserved)."""
    if not orbs:
        return ASPECT_KINDS
    unknown = set(orbs) - set(ASPECT_ANGLES_DEG)
    if unknown:
        raise ValueError(f"unknown aspect name(s) in orbs: {', '.join(sorted(unknown))}")
    out: List[AspectKind] = []
    for kind in ASPECT_KINDS:
        orb = float(orbs.get(kind.name, kind.orb))
        if not math.isfinite(orb) or orb < 0.0:
            raise ValueError(f"orb for {kind.name} must be a finite non-negative number")
        out.append(AspectKind(kind.name, kind.angle, orb))
    return tuple(out)

# ─────────────────────────────────────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AspectHit:
    a: str            # earlier body in generation order
    b: str
    aspect: str
    angle: float      # canonical angle
    orb: float        # |separation - angle|

    def as_dict(self) -> Dict[str, Any]:
        return {
            "planet1": self.a,
            "planet2": self.b,
            "aspect": self.aspect,
            "angle": float(self.angle),
            "orb": float(self.orb),
        }

# ─────────────────────────────────────────────────────────────────────────────
# Detection
# ─────────────────────────────────────────────────────────────────────────────

def compute_aspects(
    points: Sequence[Tuple[str, float]],
    orbs: Optional[Mapping[str, float]] = None,
) -> List[AspectHit]:
    """
    All aspects between distinct points, tightest first.

    Pairs are generated i < j in input order and every qualifying kind is kept,
    so one pair may yield several hits. The sort is stable: equal orbs keep
    generation order.
    """
    kinds = aspect_kinds(orbs)
    hits: List[AspectHit] = []
    for i in range(len(points) - 1):
        name_i, lon_i = points[i]
        for j in range(i + 1, len(points)):
            name_j, lon_j = points[j]
            sep = angular_separation(lon_i, lon_j)
            for kind in kinds:
                orb = abs(sep - kind.angle)
                if orb <= kind.orb:
                    hits.append(AspectHit(
                        a=name_i, b=name_j,
                        aspect=kind.name, angle=kind.angle, orb=orb,
                    ))
    return sorted(hits, key=lambda h: h.orb)
