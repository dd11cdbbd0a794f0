"""Block model benchmark graph generator with ground-truth clusters."""
