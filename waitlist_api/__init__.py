"""CoachGG waitlist service."""
