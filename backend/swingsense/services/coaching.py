"""
Coaching Tips

Maps the weakest metrics of a scored swing to a cue, a reason and a
practice drill. The cue table is static; drills are referenced by name
so a drill catalogue can resolve them later.
"""

from typing import List

from ..domain.analysis import CoachingTip, ScoreResult
from ..domain.specs import MetricName


CUE_MAP = {
    MetricName.HEAD_DRIFT: {
        "cue": "Quiet eyes; brace the front side.",
        "why": "Too much head travel hurts tracking & barrel control.",
        "drill": "Wall Head Check",
        "alt_drills": ("Head Still Wall Drill", "Quiet Eyes Wall"),
    },
    MetricName.ATTACK_ANGLE: {
        "cue": "Turn the barrel later; stay through the line-drive window.",
        "why": "Downward path reduces solid contact for youth velo.",
        "drill": "PVC Tilt Ladder",
        "alt_drills": ("Tilt Ladder", "PVC Attack Angle"),
    },
    MetricName.HIP_SHOULDER_SEP: {
        "cue": "Hold the load; fire hips first, hands last.",
        "why": "Better sequence transfers energy up the chain.",
        "drill": "Step-Behind Sequence",
        "alt_drills": ("Step-Behind Separation", "Hip-Lead Step-Behind"),
    },
    MetricName.BAT_LAG: {
        "cue": "Knob leads; keep the barrel lagging behind.",
        "why": "Lag creates bat speed without casting.",
        "drill": "Over/Underload Swings",
        "alt_drills": ("Heavy-Game-Light", "Knob-Lead Ladder"),
    },
    MetricName.TORSO_TILT: {
        "cue": "Keep an athletic hinge at launch.",
        "why": "Stable posture anchors the swing plane.",
        "drill": "PVC Posture Holds",
        "alt_drills": ("Posture Holds", "Hinge & Hold"),
    },
    MetricName.STRIDE_VAR: {
        "cue": "Repeat the same stride length every time.",
        "why": "Consistency = timing you can trust.",
        "drill": "Tape Ladder Strides",
        "alt_drills": ("Stride Ladder", "Stride Tape Drill"),
    },
    MetricName.FINISH_BALANCE: {
        "cue": "Stick the finish for 2 seconds.",
        "why": "Balanced finish = controlled swing path.",
        "drill": "Stick the Finish",
        "alt_drills": ("Freeze Finish", "Hold the Finish"),
    },
    MetricName.CONTACT_TIMING: {
        "cue": "Let the ball travel; match contact point.",
        "why": "Timing inside the window improves barrel quality.",
        "drill": "Contact Point Tee Ladder",
        "alt_drills": ("Tee Ladder", "Let-It-Travel Tee"),
    },
}

TENTATIVE_PREFIX = "Early read: "


def build_coaching_tips(score: ScoreResult, limit: int = 2) -> List[CoachingTip]:
    """
    Generate tips for the weakest metrics, weakest first.

    Metrics without a cue are skipped. When the swing was measured with low
    confidence the tips are marked tentative and the cue is softened.
    """
    tips = []
    for metric in score.weakest_metrics:
        if len(tips) >= limit:
            break
        cfg = CUE_MAP.get(metric)
        if cfg is None:
            continue

        cue = cfg["cue"]
        if score.low_confidence:
            cue = TENTATIVE_PREFIX + cue[0].lower() + cue[1:]

        tips.append(CoachingTip(
            metric=metric,
            priority=len(tips) + 1,
            cue=cue,
            why=cfg["why"],
            drill=cfg["drill"],
            alt_drills=cfg["alt_drills"],
            tentative=score.low_confidence,
        ))
    return tips
