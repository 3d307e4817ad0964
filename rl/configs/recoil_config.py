"""
Training configuration for the recoil gunner environment
Reward shaping variants and algorithm hyperparameters
"""

# Environment parameters
ENV_CONFIG = {
    "width": 800,
    "height": 600,
    "dt": 1/30,
    "max_steps": 3600,  # 120 seconds at 30 FPS
    "k_enemies": 5,
    # Nested gameplay overrides, see game.recoil.config.SessionConfig
    "session_config": {
        "player": {"max_health": 10, "invulnerability_duration": 1.0},
        "weapon": {"max_charge_time": 1.0},
        "waves": {"base_enemies_per_wave": 3, "wave_multiplier": 1.2, "time_between_waves": 3.0},
    },
}

# ==============================================================================
# REWARD SHAPING CONFIGURATIONS
# ==============================================================================

# BASELINE: balanced kills vs. damage
REWARD_CONFIG_BASELINE = {
    "name": "baseline",
    "description": "Balanced reward shaping",
    "R_KILL": 1.0,       # Reward per enemy killed
    "R_DAMAGE": 0.5,     # Penalty per health point lost
    "R_SHOT": 0.02,      # Penalty per shot (encourage charged shots)
    "R_TIME": 0.001,     # Small time penalty
    "R_DEATH": 5.0,      # Game over penalty
    "R_WAVE": 0.5,       # Reward for reaching a new wave
}

# SURVIVAL: dodge with recoil, fight second
REWARD_CONFIG_SURVIVAL = {
    "name": "survival",
    "description": "Higher damage/death penalties, lower combat rewards",
    "R_KILL": 0.5,
    "R_DAMAGE": 1.5,
    "R_SHOT": 0.05,
    "R_TIME": 0.0,
    "R_DEATH": 10.0,
    "R_WAVE": 1.0,
}

REWARD_CONFIGS = {
    "baseline": REWARD_CONFIG_BASELINE,
    "survival": REWARD_CONFIG_SURVIVAL,
}

# ==============================================================================
# ALGORITHM HYPERPARAMETERS
# ==============================================================================

PPO_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "n_steps": 1024,
    "batch_size": 256,
    "n_epochs": 10,
    "gamma": 0.99,
    "gae_lambda": 0.95,
    "clip_range": 0.2,
    "ent_coef": 0.01,
    "vf_coef": 0.5,
    "max_grad_norm": 0.5,
    "verbose": 1,
}

DQN_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 1e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 128,
    "tau": 1.0,
    "gamma": 0.99,
    "train_freq": 4,
    "gradient_steps": 1,
    "target_update_interval": 1000,
    "exploration_fraction": 0.1,
    "exploration_initial_eps": 1.0,
    "exploration_final_eps": 0.05,
    "verbose": 1,
}

# ==============================================================================
# TRAINING SETTINGS
# ==============================================================================

TRAINING_CONFIG = {
    "total_timesteps": 500_000,
    "save_freq": 10_000,
    "eval_freq": 5_000,
    "log_dir": "./logs",
    "model_dir": "./models",
    "tensorboard_log": None,  # set a path to log to TensorBoard (needs tensorboard installed)
}
