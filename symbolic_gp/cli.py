"""
symbolic_gp/cli.py - Command-line interface
"""
import logging
import time

import click

from .ast_nodes import BINARY_OPS, Constant, Variable, UnboundVariableError
from .config import GPConfig, below
from .fitness import build_cases
from .genome import Genome
from .population import Population

# name -> (function, start, stop, step)
TARGETS = {
    'quadratic': (lambda x: x ** 2 - x - 2, -1.0, 1.0, 0.05),
    'cubic': (lambda x: x ** 3 / 4 + 3 * x ** 2 / 4 - 3 * x / 2 - 2, -3.0, 3.0, 0.05),
}


def default_terminals():
    """x plus the constants 1..5"""
    return [Variable('x')] + [Constant(float(c)) for c in range(1, 6)]


@click.group()
def cli():
    """Symbolic GP - evolve arithmetic expressions that fit sampled data"""
    pass


@cli.command()
@click.option('--target', '-t', type=click.Choice(sorted(TARGETS)), default='quadratic',
              help='Function to recover')
@click.option('--population', '-p', default=200, help='Population size')
@click.option('--max-depth', default=5, help='Depth bound for generated trees')
@click.option('--generations', '-g', default=1000, help='Maximum number of generations')
@click.option('--threshold', default=0.01, help='Stop once fitness drops below this value')
@click.option('--seed', type=int, default=None, help='Random seed for a reproducible run')
@click.option('--out', '-o', type=click.Path(dir_okay=False), default=None,
              help='Save the fittest tree as JSON')
@click.option('--verbose', '-v', is_flag=True, help='Log every generation')
def run(target, population, max_depth, generations, threshold, seed, out, verbose):
    """Evolve a tree for one of the built-in targets"""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s',
                        datefmt='%H:%M:%S')

    func, start, stop, step = TARGETS[target]
    cases = build_cases(func, start, stop, step)
    try:
        config = GPConfig(
            cases=cases,
            terminal_set=default_terminals(),
            function_set=tuple(BINARY_OPS),
            max_depth=max_depth,
            population_size=population,
            max_generations=generations,
            criteria=below(threshold),
            seed=seed,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    click.echo(f"Target: {target}, {len(cases)} cases, population {population}")

    start_time = time.time()
    pop = Population(config)
    champion = pop.run()
    total_time = time.time() - start_time

    click.echo(f"\nFittest tree: {champion.tree}")
    click.echo(f"Fitness: {champion.fitness:.6f} at generation {champion.generation} "
               f"({total_time:.1f}s)")
    if not config.criteria(champion.fitness):
        click.echo("Threshold not reached within the generation budget")

    click.echo("\nexpected\t\tactual")
    for expected, actual in champion.compare(config.cases):
        click.echo(f"{expected:.6f}\t\t{actual:.6f}")

    if out:
        champion.to_json(out)
        click.echo(f"\nSaved: {out}")


@cli.command()
@click.option('--genome', '-g', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Path to genome JSON file')
@click.option('--x', 'xs', multiple=True, type=float, required=True,
              help='Value of x to evaluate at (repeatable)')
def evaluate(genome, xs):
    """Evaluate a saved tree at the given x values"""
    try:
        g = Genome.from_json(filename=genome)
    except (ValueError, KeyError) as e:
        raise click.ClickException(f"Error loading genome: {e}")

    click.echo(f"Expression: {g.tree}")
    click.echo("x\t\tvalue")
    for x in xs:
        try:
            value = g.evaluate({'x': x})
        except UnboundVariableError as e:
            raise click.ClickException(str(e))
        click.echo(f"{x:g}\t\t{value:.6f}")


if __name__ == '__main__':
    cli()
