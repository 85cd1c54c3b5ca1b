"""Pure Python Groth16 over bn128, specialised to fixed polynomial relations."""
