# ==============================================================================
# run.py
# ------------------------------------------------------------------------------
# The main entry point to launch the Flask application.
# ==============================================================================

from dsr_commission import create_app
from dsr_commission.calculator.engine import (calculate_bonus_commission, calculate_sale_commission,
                                              get_dsr_tier)
from dsr_commission.calculator.rates import DEFAULT_CONFIG

# Create the Flask application instance using the factory function
app = create_app()

@app.shell_context_processor
def make_shell_context():
    """Provides a shell context for the `flask shell` command."""
    return {
        'calculate_sale_commission': calculate_sale_commission,
        'calculate_bonus_commission': calculate_bonus_commission,
        'get_dsr_tier': get_dsr_tier,
        'rates': DEFAULT_CONFIG,
    }

if __name__ == '__main__':
    app.run(debug=True)
