"""Physics model: parameters, validation, formulas and animation kinematics (no Qt)."""
