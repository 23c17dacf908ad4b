"""Theme color editing engine: conversion, parsing, paths and edit history."""

__version__ = "0.1.0"
