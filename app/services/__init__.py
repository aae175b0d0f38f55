"""
Service Organization
====================

**application/**
  Collaborators reached through the EventBus: SMS notifications and the
  remote event log.

**hardware/**
  DeviceController, the single owner of the pump state.

``container.WateringContext`` builds one of each and hands them to the
control loops and the Flask app.
"""
