"""Module entry point for `python -m ssm.cli`.

Ensures the Click command group runs when the package is executed as a module.
"""

if __name__ == "__main__":  # pragma: no cover (invocation driven)
    from ssm.cli import cli

    cli()
