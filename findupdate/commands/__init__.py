"""Click subcommands for findupdate."""
