"""
Settings, structured logging and domain constants.

Import from the submodules directly; logging depends on settings, so this
package does not import either eagerly.
"""
