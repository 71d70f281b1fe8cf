"""pyxi: card ratings, affinity scoring and lineup generation for football formations."""
