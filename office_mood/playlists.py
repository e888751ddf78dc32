"""Static mood -> playlist recommendations."""

from .models import Playlist

PLAYLISTS: dict[str, Playlist] = {
    "Chaos": Playlist(
        name="Calm Lo-Fi Focus",
        url="https://open.spotify.com/playlist/37i9dQZF1DX3Ogo9pFvBkY",
    ),
    "Stressed": Playlist(
        name="Peaceful Piano",
        url="https://open.spotify.com/playlist/37i9dQZF1DX4sWSpwBtn3A",
    ),
    "Neutral": Playlist(
        name="Easy Indie",
        url="https://open.spotify.com/playlist/37i9dQZF1DX2Nc3B70tvx0",
    ),
    "Good": Playlist(
        name="Feel Good Pop",
        url="https://open.spotify.com/playlist/37i9dQZF1DXdPec7aLTmlC",
    ),
    "Vibes": Playlist(
        name="Office Party Bangers",
        url="https://open.spotify.com/playlist/37i9dQZF1DXaXB8fQg7xif",
    ),
}


def playlist_for_mood(mood_label: str) -> Playlist:
    """Return the playlist for a label; unknown labels get the Neutral one."""
    return PLAYLISTS.get(mood_label, PLAYLISTS["Neutral"])
