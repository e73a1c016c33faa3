"""Pay equity compliance engine.

Determines whether a jurisdiction's job classification data satisfies the
statutory pay equity tests and moves its report through the approval
workflow: automatic disposition, reviewer decisions, certificate issuance
and the audit trail.
"""

__version__ = "0.1.0"
