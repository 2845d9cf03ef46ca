"""Logging setup for the application."""

import logging
import sys


def setup_logger(log_level: str = "INFO", name: str = "repo_monitor") -> logging.Logger:
    """
    Set up and configure application logger.
    
    Creates a logger with a simple, readable format suitable for CLI output.
    Library modules log through logging.getLogger(__name__) and inherit the
    root configuration installed here.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger name (default: repo_monitor)
        
    Returns:
        logging.Logger: Configured logger instance
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    
    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )
    
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    
    return logger
