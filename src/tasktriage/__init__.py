"""tasktriage - task decay scoring, same-day scheduling and habit insights."""
