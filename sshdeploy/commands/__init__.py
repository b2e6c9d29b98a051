"""sshdeploy CLI commands"""
