from dataclasses import dataclass, field


@dataclass
class EngineConfig:
    critical_high_factor: float | None = 1.5  # None disables critical escalation
    critical_low_factor: float | None = 0.5
    skip_values: tuple[str, ...] = field(default_factory=lambda: ("pending",))
    include_normal_assessment: bool = True  # Emit "all normal" info when nothing is flagged
