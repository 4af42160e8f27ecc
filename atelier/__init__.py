"""Atelier: booking and order tracking for a bespoke tailoring studio."""
