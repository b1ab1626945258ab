from .args import KakuConfig
from .general import CommandRunner
from .output import log, warn


def apply_configuration(config: KakuConfig, runner: CommandRunner) -> None:
	log('Step 11: Applying dotfiles configuration using nixos-rebuild', fg='green')
	runner.run(['nixos-rebuild', 'switch', '--flake', config.system_flake], working_directory=config.clone_dir)

	log('Step 12: Activating Home Manager configuration', fg='green')
	runner.run(['home-manager', 'switch', '--flake', config.home_profile])

	log('Configuration applied successfully!', fg='green')


def print_password_notice(config: KakuConfig) -> None:
	warn('====================== IMPORTANT ======================')
	warn("Don't forget to change your password with:")
	warn(f'  passwd {config.login_user}')
	warn('=======================================================')
