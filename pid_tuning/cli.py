#!/usr/bin/env python3
"""
Command-line front end for the tuning calculator.

Usage:
    pid-tuning tune <Ku> <Tu> [--rule RULE]
    pid-tuning simulate <Ku> <Tu> [options]
    pid-tuning config {save,list,load,delete} ...

Examples:
    pid-tuning tune 2.2 20 --rule "Z-N PID"
    pid-tuning simulate 2.2 20 --report --csv response.csv
    pid-tuning simulate 2.2 20 --plot --range 0 30 --save response.png
    pid-tuning config save "Pump 1" 2.2 20 --rule PI
    pid-tuning config list
"""

from typing import List, Optional
from pathlib import Path
import argparse
import logging
import sys

from pid_tuning.analyzer.report import build_tuning_prompt, format_gains, generate_report
from pid_tuning.core.tuning_rules import TuningInputs, TuningRule, compute_gains
from pid_tuning.export.csv_export import write_trajectory_csv
from pid_tuning.pipeline import evaluate_inputs
from pid_tuning.simulation.config import SimulationConfig
from pid_tuning.storage.config_store import (
    ConfigurationNotFoundError,
    ConfigurationStore,
    StorageError,
)


logger = logging.getLogger(__name__)

DEFAULT_STORE = Path.home() / ".pid_tuning" / "configurations.json"
RULE_CHOICES = [rule.label for rule in TuningRule] + [rule.value for rule in TuningRule]


def _add_rule_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--rule',
        default=TuningRule.PID.label,
        choices=RULE_CHOICES,
        help='Ziegler-Nichols rule (default: %(default)s)'
    )


def _add_inputs_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('ku', type=str, help='Ultimate gain Ku')
    parser.add_argument('tu', type=str, help='Ultimate period Tu')
    _add_rule_argument(parser)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pid-tuning',
        description='Ziegler-Nichols PID tuning and closed-loop simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s tune 2.2 20
  %(prog)s simulate 2.2 20 --rule "Z-N PI" --report
  %(prog)s config save "Pump 1" 2.2 20
        """
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--store',
        type=str,
        metavar='FILE',
        default=str(DEFAULT_STORE),
        help='Configuration store file (default: %(default)s)'
    )

    sub = parser.add_subparsers(dest='command', required=True)

    tune = sub.add_parser('tune', help='Compute controller parameters')
    _add_inputs_arguments(tune)
    tune.add_argument(
        '--prompt',
        action='store_true',
        help='Print the question for the AI assistant'
    )

    sim = sub.add_parser('simulate', help='Simulate the closed-loop response')
    _add_inputs_arguments(sim)
    sim.add_argument('--config', type=str, metavar='FILE',
                     help='Simulation settings as JSON')
    sim.add_argument('--report', action='store_true',
                     help='Print analysis report')
    sim.add_argument('--csv', type=str, metavar='FILE',
                     help='Write the trajectory to CSV')
    sim.add_argument('--plot', action='store_true',
                     help='Plot the response')
    sim.add_argument('--range', type=float, nargs=2, metavar=('X1', 'X2'),
                     help='Time window to show on the plot')
    sim.add_argument('--save', type=str, metavar='FILE',
                     help='Save the plot instead of displaying it')
    sim.add_argument('--dpi', type=int, default=150,
                     help='DPI for saved figures (default: %(default)s)')

    config = sub.add_parser('config', help='Manage saved configurations')
    config_sub = config.add_subparsers(dest='action', required=True)

    save = config_sub.add_parser('save', help='Save a configuration')
    save.add_argument('name', type=str, help='Configuration name')
    _add_inputs_arguments(save)

    config_sub.add_parser('list', help='List saved configurations')

    load = config_sub.add_parser('load', help='Show gains for a saved configuration')
    load.add_argument('name', type=str, help='Configuration name')

    delete = config_sub.add_parser('delete', help='Delete a configuration')
    delete.add_argument('name', type=str, help='Configuration name')

    return parser


def _print_gains(inputs: TuningInputs) -> None:
    gains = compute_gains(inputs)
    if gains is None:
        print("Parameters undefined: Ku and Tu must be positive numbers")
    else:
        print(f"{inputs.rule.label}: {format_gains(gains)}")


def _cmd_tune(args: argparse.Namespace) -> int:
    inputs = TuningInputs.from_text(args.ku, args.tu, args.rule)
    _print_gains(inputs)
    if args.prompt:
        print()
        print(build_tuning_prompt(inputs, compute_gains(inputs)))
    return 0


def _cmd_simulate(args: argparse.Namespace) -> int:
    config = SimulationConfig()
    if args.config:
        config = SimulationConfig.from_json(Path(args.config).read_text())

    inputs = TuningInputs.from_text(args.ku, args.tu, args.rule)
    outcome = evaluate_inputs(inputs, config)
    _print_gains(inputs)

    if not outcome.trajectory:
        print("No trajectory simulated")
        return 0 if outcome.is_defined else 1

    last = outcome.trajectory[-1]
    print(f"Simulated {len(outcome.trajectory)} samples, "
          f"process value {last.process_value:.4f} at t={last.time:g}")

    if args.report:
        print()
        print(generate_report(inputs, outcome.gains, outcome.trajectory))

    if args.csv:
        path = write_trajectory_csv(args.csv, outcome.trajectory)
        print(f"Trajectory saved to: {path}")

    if args.plot or args.save:
        from pid_tuning.analyzer.plots import TrajectoryPlotter

        plotter = TrajectoryPlotter()
        fig = plotter.plot_response(
            outcome.trajectory,
            title=f"{inputs.rule.label} response ({format_gains(outcome.gains)})",
            time_range=tuple(args.range) if args.range else None,
        )
        if args.save:
            TrajectoryPlotter.save(fig, args.save, dpi=args.dpi)
            TrajectoryPlotter.close(fig)
            print(f"Plot saved to: {args.save}")
        else:
            TrajectoryPlotter.show()

    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    store = ConfigurationStore(args.store)

    if args.action == 'save':
        inputs = TuningInputs.from_text(args.ku, args.tu, args.rule)
        if not store.save(args.name, inputs):
            print("Error: configuration name must not be empty", file=sys.stderr)
            return 1
        print(f"Saved {args.name.strip()!r}")

    elif args.action == 'list':
        entries = store.list()
        if not entries:
            print("No saved configurations")
        for entry in entries:
            i = entry.inputs
            print(f"{entry.name}: Ku={i.ultimate_gain:g}, Tu={i.ultimate_period:g}, {i.rule.label}")

    elif args.action == 'load':
        inputs = store.load(args.name)
        print(f"{args.name}: Ku={inputs.ultimate_gain:g}, Tu={inputs.ultimate_period:g}")
        _print_gains(inputs)

    elif args.action == 'delete':
        if store.delete(args.name):
            print(f"Deleted {args.name!r}")
        else:
            print(f"No configuration named {args.name!r}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    handlers = {
        'tune': _cmd_tune,
        'simulate': _cmd_simulate,
        'config': _cmd_config,
    }

    logger.debug("Running %s command", args.command)
    try:
        return handlers[args.command](args)
    except ConfigurationNotFoundError as e:
        print(f"Error: no configuration named {e.args[0]!r}", file=sys.stderr)
    except (ValueError, StorageError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
    return 1


if __name__ == '__main__':
    sys.exit(main())
