from utils.logging.logging_manager import LogManager


def handle_generic_exception(exception: Exception, context_message: str, metadata: dict | None = None):
    """Logs an unexpected exception with traceback and re-raises it with context.

    :param exception: The exception raised.
    :param context_message: Custom message providing context for the error.
    :param metadata: Additional metadata (optional) for debugging purposes.
    """
    logger = LogManager.get_instance().get_logger("ErrorManager")
    metadata_info = f" | Metadata: {metadata}" if metadata else ""
    logger.error(
        f"An error occurred: {context_message}{metadata_info} - {exception}",
        exc_info=True,
    )
    raise RuntimeError(f"{context_message}{metadata_info}") from exception
