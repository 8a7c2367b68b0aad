# quantum_snapshot_stats/src/quantum_snapshot_stats/cli.py
import logging
from pathlib import Path

import click
from qiskit import qasm2

from .exceptions import SnapshotStatsError
from .simulation import run_shots
from .utils import load_config, to_json, write_results

STAT_FIELDS = (
    "quantum_state_ket",
    "density_matrix",
    "probabilities",
    "probabilities_ket",
    "inner_products",
    "overlaps",
)


def _load_circuit(config_data, config_path):
    circuit_path = config_data.get("circuit")
    if not circuit_path:
        raise ValueError("A 'circuit' (OpenQASM 2 file) must be defined in the config.")
    path = Path(circuit_path)
    if not path.is_absolute():
        path = Path(config_path).parent / path
    return qasm2.load(str(path), custom_instructions=qasm2.LEGACY_CUSTOM_INSTRUCTIONS)


@click.group()
@click.option('--log-level', default='WARNING', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging verbosity.')
def cli(log_level):
    """
    Quantum Snapshot Statistics CLI
    """
    logging.basicConfig(level=getattr(logging, log_level.upper()),
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')


@cli.command()
@click.option('--config', '-c', default='config.yaml', help='Path to the configuration file.')
@click.option('--shots', type=int, default=None, help='Override the number of shots.')
@click.option('--seed', type=int, default=None, help='Override the sampling seed.')
@click.option('--json-output', is_flag=True, help='Print the full result document as JSON.')
@click.option('--json-file', type=click.Path(dir_okay=False), default=None,
              help='Write the full result document to this JSON file.')
def run(config, shots, seed, json_output, json_file):
    """
    Run a circuit for many shots and report averaged snapshot statistics.
    """
    try:
        config_data = load_config(config)
        circuit = _load_circuit(config_data, config)

        shots = shots if shots is not None else int(config_data.get('shots', 1024))
        seed = seed if seed is not None else config_data.get('seed')

        engine = run_shots(
            circuit,
            config_data.get('engine', {}),
            shots=shots,
            seed=seed,
            batches=int(config_data.get('batches', 1)),
            max_workers=config_data.get('max_workers'),
        )
        document = engine.export()

        if json_output:
            click.echo(to_json(document))
        else:
            click.echo("Simulation complete.")
            click.echo(f"Shots: {document['shots']}")
            for name, value in document.get('counts', {}).items():
                click.echo(f"  {name}: {value}")
            for name in STAT_FIELDS:
                if name in document:
                    click.echo(f"Collected: {name}")

        if json_file:
            saved = write_results(json_file, document)
            click.echo(f"Saved JSON result to: {saved}")

    except (FileNotFoundError, ValueError, SnapshotStatsError) as e:
        click.secho(str(e), fg='red')
        raise SystemExit(1)
    except Exception as e:
        click.secho(f"An error occurred: {e}", fg='red')
        raise SystemExit(1)


if __name__ == '__main__':
    cli()
