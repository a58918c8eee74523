"""
Service Organization
====================

**application/**
  Singleton services managed by ServiceContainer. One instance per process.
  Examples: ThresholdService, NotificationsService, EventService

**utilities/**
  Provider clients without shared state.
  Examples: WhatsAppService
"""
