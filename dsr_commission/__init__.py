# ==============================================================================
# dsr_commission/__init__.py
# ------------------------------------------------------------------------------
# Application factory for creating and configuring the Flask app instance.
# ==============================================================================

import logging

import click
from flask import Flask
from config import Config

from dsr_commission.calculator.rates import DEFAULT_CONFIG

__version__ = '1.0.0'


def get_commission_config(app):
    """Returns the rate tables the given app was started with."""
    return app.extensions['commission_config']


def create_app(config_class=Config):
    """
    Application factory function. Creates and configures the Flask application.

    Args:
        config_class (class): The configuration class to use.

    Returns:
        Flask: The configured Flask application instance.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)

    # Configure logging
    logging.basicConfig(level=app.config['LOG_LEVEL'],
                        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

    # Rate tables are resolved once, here, and shared read-only by every request
    app.extensions['commission_config'] = app.config.get('COMMISSION_CONFIG') or DEFAULT_CONFIG

    # Register blueprints with the application
    from dsr_commission.main import bp as main_bp
    app.register_blueprint(main_bp)

    @app.cli.command("rates")
    def rates():
        """Prints the commission rate tables in use."""
        tables = get_commission_config(app).describe()
        click.echo("Upfront commission:")
        for sale_type, amount in tables['upfront'].items():
            click.echo(f"  {sale_type:<6} {amount:>10,}")
        click.echo(f"Activation commission: {tables['activation']:,}")
        click.echo("Package commission:")
        for package, amount in tables['packages'].items():
            click.echo(f"  {package:<14} {amount:>10,}")
        click.echo("Bonus bands (first match wins):")
        for band in tables['bonus_bands']:
            click.echo(f"  {band['tier']:<10} {band['min_sales']:>3}-{band['max_sales']:<3} {band['bonus']:>10,}")

    app.logger.info('DSR Commission Engine startup complete')

    return app
