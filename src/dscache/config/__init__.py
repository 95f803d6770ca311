"""dscache Config — typed configuration properties."""
