"""MQTT client construction."""
