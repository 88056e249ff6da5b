"""
Text output for tuning results: the summary report and the question
handed to the AI assistant.
"""

from typing import Optional, Sequence
import math

from pid_tuning.analyzer.metrics import TrajectoryMetrics
from pid_tuning.core.tuning_rules import ControllerGains, TuningInputs
from pid_tuning.simulation.simulator import SimulationSample


def _format_number(value: float) -> str:
    if isinstance(value, float) and math.isnan(value):
        return "invalid"
    return f"{value:g}"


def _format_optional(value: Optional[float], unit: str = " s") -> str:
    if value is None:
        return "n/a"
    return f"{value:.2f}{unit}"


def format_gains(gains: Optional[ControllerGains]) -> str:
    """Render gains as ``Kp=1.320, Ti=10.000, Td=2.500`` (Ti=N/A when infinite)."""
    if gains is None:
        return "Kp=-, Ti=-, Td=-"
    ti = f"{gains.ti:.3f}" if math.isfinite(gains.ti) else "N/A"
    return f"Kp={gains.kp:.3f}, Ti={ti}, Td={gains.td:.3f}"


def build_tuning_prompt(inputs: TuningInputs, gains: Optional[ControllerGains]) -> str:
    """
    Build the question sent to the assistant about the current tuning.

    Args:
        inputs: Operator inputs
        gains: Gains derived from the inputs (None when undefined)

    Returns:
        Prompt text
    """
    header = (
        f"I am tuning a PID controller using the {inputs.rule.label} method. "
        f"My ultimate gain (Ku) is {_format_number(inputs.ultimate_gain)} and "
        f"my ultimate period (Tu) is {_format_number(inputs.ultimate_period)}."
    )
    if gains is None:
        return (
            f"{header}\n"
            "These inputs do not give valid controller parameters, so no response was simulated. "
            "What should I check in my ultimate gain and period measurements?"
        )
    return (
        f"{header}\n"
        f"This results in the following parameters: {format_gains(gains)}.\n"
        "Based on the simulated response graph, what can you tell me about the performance "
        "of this tuning? Are there signs of overshoot, oscillation, or slow response time? "
        "What might be the next step to fine-tune these parameters manually?"
    )


def generate_report(
    inputs: TuningInputs,
    gains: Optional[ControllerGains],
    samples: Sequence[SimulationSample]
) -> str:
    """
    Generate text report of a tuning calculation.

    Returns:
        Formatted text report
    """
    lines = [
        "=" * 60,
        "PID TUNING REPORT",
        "=" * 60,
        "",
        "INPUTS",
        "-" * 40,
        f"  Rule: {inputs.rule.label}",
        f"  Ultimate Gain (Ku): {_format_number(inputs.ultimate_gain)}",
        f"  Ultimate Period (Tu): {_format_number(inputs.ultimate_period)}",
        "",
        "CONTROLLER PARAMETERS",
        "-" * 40,
    ]

    if gains is None:
        lines.extend([
            "  Undefined: Ku and Tu must be positive numbers",
            "",
            "=" * 60,
        ])
        return "\n".join(lines)

    lines.extend([
        f"  {format_gains(gains)}",
        f"  Ki={gains.ki:.4f}, Kd={gains.kd:.4f}",
        "",
        "SIMULATED RESPONSE",
        "-" * 40,
    ])

    if len(samples) < 2:
        lines.append("  No trajectory (controller disabled)")
    else:
        m = TrajectoryMetrics.from_samples(samples)
        lines.extend([
            f"  Samples: {len(samples)}",
            f"  Final Value: {m.final_value:.4f} (setpoint {m.final_setpoint:g})",
            f"  Steady-State Error: {m.steady_state_error:.4f}",
            f"  Overshoot: {m.overshoot_percent:.2f} %",
            f"  Peak: {m.peak_value:.4f} at {m.peak_time:.2f} s",
            f"  Rise Time (10-90%): {_format_optional(m.rise_time)}",
            f"  Settling Time ({m.tolerance * 100:.0f}%): {_format_optional(m.settling_time)}",
            f"  IAE: {m.iae:.4f}",
            f"  Converged: {'yes' if m.converged else 'no'}",
        ])

    lines.extend(["", "=" * 60])
    return "\n".join(lines)
