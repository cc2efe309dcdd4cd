"""On-call override bot: Slack slash command and modal front end for Rootly overrides."""
