"""
This module provides a utility function for creating and configuring a logger
that sends logs to a Graylog server using the GELF (Graylog Extended Log Format) protocol.

The logger is configured with a UDP handler and uses the environment variable
`SERVICE_NAME` to set the application name in the log messages. The Graylog
host and port come from the `graylog` section of config.json.

Dependencies:
    - logging: Standard Python logging module.
    - pygelf: A library for sending logs to Graylog in GELF format.
    - shared.config: Loads config.json with defaults.

Functions:
    - get_logger(service_name: str) -> logging.Logger:
"""

import logging
import os

from pygelf import GelfUdpHandler

from shared.config import get_config

GRAYLOG = get_config()["graylog"]


def get_logger(service_name: str) -> logging.Logger:
    """
    Creates and configures a logger for the specified module.

    The logger level is DEBUG and a single GELF UDP handler is attached, so
    calling this twice with the same name does not duplicate output.

    Args:
        service_name (str): The dotted logger name, e.g. "pimbridge.pimbridge.sync".

    Returns:
        logging.Logger: A configured logger instance.
    """
    service_name_env = os.getenv("SERVICE_NAME", "pimbridge")

    logger = logging.getLogger(service_name)
    logger.setLevel(logging.DEBUG)

    if not any(isinstance(h, GelfUdpHandler) for h in logger.handlers):
        udp_handler = GelfUdpHandler(host=GRAYLOG["host"], port=GRAYLOG["port"], _app_name=service_name_env, debug=True)
        logger.addHandler(udp_handler)

    return logger
