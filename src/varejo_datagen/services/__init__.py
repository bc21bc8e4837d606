"""Services layer: sink writers for the generated dataset."""
