"""Provider plugins that supply ResourceManager implementations."""
