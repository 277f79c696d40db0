"""HTTP helpers shared by NeighborFit blueprints."""
