"""Allow gameasure to be executable through `python -m gameasure`."""

from gameasure.cli import cli_app


if __name__ == "__main__":  # pragma: no cover
    cli_app(prog_name="gameasure")
