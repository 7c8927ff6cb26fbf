"""Read-side projections: inbox and sent box listings."""
