"""GitHub collaborators: labelling and comment minimization."""
