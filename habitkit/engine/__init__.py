"""Pure habit engine: day ids, streaks, view buckets and mutations."""
