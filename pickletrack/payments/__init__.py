"""Payment calculations and payment record storage."""
