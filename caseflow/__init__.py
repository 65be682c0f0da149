"""caseflow: rule-based workflow automation for firm domain events."""
