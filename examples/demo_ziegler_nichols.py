#!/usr/bin/env python3
"""
Ziegler-Nichols Tuning Demo

Demonstrates:
- Computing P, PI and PID settings from Ku and Tu
- Simulating the closed-loop step response of each
- Comparing the responses on one plot
- Saving a named configuration
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib.pyplot as plt

from pid_tuning.analyzer.metrics import TrajectoryMetrics
from pid_tuning.analyzer.report import build_tuning_prompt, format_gains, generate_report
from pid_tuning.core.tuning_rules import TuningInputs, TuningRule, compute_gains
from pid_tuning.export.csv_export import write_trajectory_csv
from pid_tuning.simulation.simulator import simulate
from pid_tuning.storage.config_store import ConfigurationStore


def main():
    print("=" * 60)
    print("Ziegler-Nichols Tuning Demo")
    print("=" * 60)

    # Ultimate gain and period from a sustained-oscillation test
    ku, tu = 2.2, 20.0
    print(f"\nUltimate gain Ku = {ku}, ultimate period Tu = {tu}")

    results = {}
    for rule in TuningRule:
        inputs = TuningInputs(ku, tu, rule)
        gains = compute_gains(inputs)
        samples = simulate(gains)
        metrics = TrajectoryMetrics.from_samples(samples)
        results[rule] = (inputs, gains, samples)

        print(f"\n{rule.label}: {format_gains(gains)}")
        print(f"  Final value: {metrics.final_value:.4f}")
        print(f"  Overshoot: {metrics.overshoot_percent:.1f}%")
        print(f"  Converged: {'yes' if metrics.converged else 'no'}")

    inputs, gains, samples = results[TuningRule.PID]
    print()
    print(generate_report(inputs, gains, samples))

    print("\nQuestion for the assistant:")
    print(build_tuning_prompt(inputs, gains))

    write_trajectory_csv("output/zn_pid_response.csv", samples)

    store = ConfigurationStore("output/configurations.json")
    store.save("Demo loop", inputs)
    print(f"\nSaved configurations: {[entry.name for entry in store.list()]}")

    # Compare responses
    print("\nGenerating plots...")
    fig, ax = plt.subplots(figsize=(12, 6))
    first = results[TuningRule.PID][2]
    ax.step([s.time for s in first], [s.setpoint for s in first], where='post',
            color='black', linestyle='--', label='Setpoint')
    for rule, (_, rule_gains, rule_samples) in results.items():
        ax.plot([s.time for s in rule_samples], [s.process_value for s in rule_samples],
                linewidth=2, label=f"{rule.label} ({format_gains(rule_gains)})")
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Value')
    ax.set_title('Ziegler-Nichols Rules Compared', fontweight='bold')
    ax.grid(True, alpha=0.3)
    ax.legend(loc='lower right')
    fig.tight_layout()

    print("\nClose plot window to exit.")
    plt.show()


if __name__ == "__main__":
    # Create output directory
    Path("output").mkdir(exist_ok=True)
    main()
