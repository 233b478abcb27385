"""Physics core of the particle playground: bodies, force models, collisions and spawning."""
