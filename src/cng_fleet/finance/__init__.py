"""Finance — payback, strategy comparison and sensitivity analysis."""
